"""Core backup planning and transfer logic for rsync-backup."""

from .classifier import ClassificationError, Classifier
from .models import BackupInfo, Classification, DirectoryResult
from .prepare import prepare_backup
from .transfer import RsyncTransfer, TransferError, build_destination, transfer_items

__all__ = [
    "BackupInfo",
    "Classification",
    "Classifier",
    "ClassificationError",
    "DirectoryResult",
    "RsyncTransfer",
    "TransferError",
    "build_destination",
    "prepare_backup",
    "transfer_items",
]
