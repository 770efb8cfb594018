from donations.services.donation_service import DonationService
from donations.services.need_service import NeedService

__all__ = ["DonationService", "NeedService"]
