class PortfolioDataError(Exception):
    """Raised when portfolio input cannot be turned into valid models"""
    pass

class InvalidHoldingError(PortfolioDataError):
    """Raised when a holding entry is malformed or out of range"""
    pass

class InvalidAllocationError(PortfolioDataError):
    """Raised when a target allocation entry is malformed or out of range"""
    pass
