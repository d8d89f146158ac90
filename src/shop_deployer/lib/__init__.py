"""Domain libraries: IPFS publishing, DNS providers and the deploy pipeline stages."""
