class SvcompareError(Exception):
    pass


class NoMainInputError(SvcompareError):
    """
    raised when the variant set that all other sets are compared against cannot be determined
    """

    pass


class InvalidVariantError(SvcompareError, ValueError):
    """
    raised when a structural variant record is inconsistent

    for example if the first breakpoint is downstream of the second breakpoint
    for a deletion on a single chromosome
    """

    pass


class UnsupportedFormatError(SvcompareError):
    pass
