class BuildError(Exception):
    pass


class AmbiguousSpecificationError(BuildError):
    def __init__(self, candidates: list[str]) -> None:
        self.candidates = candidates
        super().__init__(
            f"Multiple gemspecs found: {candidates}, please specify one"
        )


class SpecificationNotFoundError(BuildError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Gemspec file not found: {path}")


class SpecificationLoadError(BuildError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("Error loading gemspec. Aborting.")


class PackagingError(Exception):
    pass


class InvalidSpecificationError(PackagingError):
    pass


class SigningError(PackagingError):
    pass


class VerificationError(Exception):
    pass


class InvalidPackageError(VerificationError):
    pass


class SignatureVerificationError(VerificationError):
    pass
