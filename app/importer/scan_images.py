"""
Show image scanner.

This module scans the show artwork directory and fills in the
``image_filename`` of dataset entries that do not have one yet, matching
files by a slug of the show title.
"""

import json
import re
from pathlib import Path

from core.config import SHOW_IMAGES_DIR, SHOWS_JSON_PATH
from importer.errors import ImportFileError
from importer.import_shows import load_shows_json

IMAGE_EXTENSIONS = (".jpg", ".jpeg")

# Characters dropped outright rather than turned into hyphens
DROPPED_CHARS_PATTERN = re.compile(r"[:()']")
NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(title):
    """
    Turn a show title into the base of its image filename.

    "Bluey: The Movie" -> "bluey-the-movie"
    """
    if not isinstance(title, str):
        return ""

    slug = DROPPED_CHARS_PATTERN.sub("", title.lower())
    slug = NON_ALNUM_PATTERN.sub("-", slug)
    return slug.strip("-")


def find_image(slug, filenames):
    """
    Return the first JPEG filename starting with ``slug``, or None.
    """
    if not slug:
        return None

    for filename in filenames:
        lower = filename.lower()
        if lower.startswith(slug) and lower.endswith(IMAGE_EXTENSIONS):
            return filename
    return None


def match_image_filenames(json_path=SHOWS_JSON_PATH, image_dir=SHOW_IMAGES_DIR):
    """
    Fill missing image filenames in the dataset and write it back.

    Only entries without an ``image_filename`` are touched. Returns
    (matched, unmatched) lists of titles.
    """
    image_root = Path(image_dir)
    if not image_root.is_dir():
        raise ImportFileError(f"Image directory not found: {image_root}")

    shows = load_shows_json(json_path)
    filenames = sorted(p.name for p in image_root.iterdir() if p.is_file())
    print(f"[INFO] Found {len(filenames)} image files in {image_root}")

    matched = []
    unmatched = []

    for index, show in enumerate(shows):
        if not isinstance(show, dict) or not show.get("title"):
            print(f"[SKIP] Entry {index}: missing title")
            continue

        if show.get("image_filename"):
            continue

        filename = find_image(slugify(show["title"]), filenames)
        if filename is None:
            unmatched.append(show["title"])
            continue

        show["image_filename"] = filename
        matched.append(show["title"])
        print(f"[INFO] {show['title']} -> {filename}")

    with Path(json_path).open("w", encoding="utf-8") as f:
        json.dump(shows, f, ensure_ascii=False, indent=2)

    for title in unmatched:
        print(f"[WARN] No image found for: {title}")

    print(f"[OK] Image scan complete: {len(matched)} matched, {len(unmatched)} unmatched")
    return matched, unmatched
