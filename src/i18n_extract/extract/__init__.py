"""Key extraction: scanning, classification, tree merging and assets."""
