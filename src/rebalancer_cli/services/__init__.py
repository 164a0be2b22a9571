from .portfolio_file_service import PortfolioDocument, PortfolioFileService

__all__ = ["PortfolioDocument", "PortfolioFileService"]
