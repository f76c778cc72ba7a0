"""Source indexing: descriptors, the function registry and the indexer."""
