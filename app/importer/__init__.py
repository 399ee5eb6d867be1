from importer.import_shows import ImportSummary
from importer.scan_images import match_image_filenames

__all__ = ["ImportSummary", "match_image_filenames"]
