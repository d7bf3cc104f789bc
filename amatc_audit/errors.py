"""Exception types raised by the AMATC audit pipeline."""


class AmatcAuditError(Exception):
    """Base class for pipeline failures."""


class ConfigError(AmatcAuditError):
    """Required configuration is missing or malformed."""


class GSOMResponseError(AmatcAuditError):
    """The CDO API returned a payload we cannot turn into one value."""


class ReferenceDataError(AmatcAuditError):
    """The reference dataset is missing its join key."""


class DegenerateFitError(AmatcAuditError):
    """A regression window has fewer observations than parameters."""

    def __init__(self, target_year: int, nobs: int, nparams: int):
        self.target_year = target_year
        self.nobs = nobs
        self.nparams = nparams
        super().__init__(
            f"Cannot fit hindcast for {target_year}: "
            f"{nobs} observations for {nparams} parameters"
        )
