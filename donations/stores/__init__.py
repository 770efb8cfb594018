from donations.stores.interfaces import DonationRepository, NeedRepository, Repository

__all__ = ["DonationRepository", "NeedRepository", "Repository"]
