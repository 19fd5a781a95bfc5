from .fsrs_model import FsrsMemoryModel, FsrsParams

__all__ = ["FsrsMemoryModel", "FsrsParams"]
