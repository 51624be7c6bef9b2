"""HTTP surface of the Direct API."""
