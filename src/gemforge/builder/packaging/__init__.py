"""
The `packaging` sub-package contains modules related to the construction and
verification of `.gem` packages.

This includes:
- Orchestrating the build: locating, loading and handing a gemspec to the packager.
- Validating specifications and writing the gem archive.
- Reading built gems back and checking their checksums and signatures.
"""
