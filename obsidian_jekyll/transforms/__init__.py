"""Transform stages and filters for obsidian-jekyll pipelines."""
