from civicresolve.models.complaint import Complaint, StatusHistoryEntry
from civicresolve.models.contractor import Contractor
from civicresolve.models.user import RewardWallet

__all__ = [
    "Complaint",
    "StatusHistoryEntry",
    "Contractor",
    "RewardWallet",
]
