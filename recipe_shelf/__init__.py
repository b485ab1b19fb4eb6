"""
Read, write and manage folders of recipes written in the RecipeMD Markdown
format.
"""
