from setuptools import setup, find_packages

setup(
    name="recipe_shelf",
    version="1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"recipe_shelf.parser": ["grammar.peg"]},
    description="Read, write and manage folders of RecipeMD recipes.",
    install_requires=["marko>=2.0", "peggie>=0.2.0"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "recipe-shelf=recipe_shelf.scripts.recipe_shelf:main",
            "recipe-shelf-lint=recipe_shelf.scripts.recipe_shelf_lint:main",
        ],
    },
)
