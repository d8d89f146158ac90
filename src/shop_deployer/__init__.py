"""Shop deployer — publish static shop builds to IPFS and DNS."""

__version__ = "0.1.0"
