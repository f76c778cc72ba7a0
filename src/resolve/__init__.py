"""Call-site extraction and classification."""
