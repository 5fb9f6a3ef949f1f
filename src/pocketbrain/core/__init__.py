"""PocketBrain core - configuration and the tool layer over the document store."""
