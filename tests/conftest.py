"""
Shared test fixtures.

Provides pytest fixtures that build a real SQLite catalog in a temporary
directory through the importer, a connected Database handle for it, and a
TestClient around an application using that handle.
"""

import json

import pytest
from fastapi.testclient import TestClient

from db.connection import Database, ReconnectPolicy
from importer.import_shows import import_shows
from main import create_app

# Inserted in this order, so IDs run 1..7 down the list
SAMPLE_SHOWS = [
    {
        "title": "Bluey",
        "stimulation_score": 2,
        "platform": "Disney+",
        "target_age_group": "4-7",
        "seasons": 3,
        "avg_episode_length": "7 min",
        "animation_style": "2D",
        "dialogue_intensity": "Moderate",
        "scene_frequency": "Low",
        "sound_effects_level": "Low",
        "total_music_level": "Low-Moderate",
        "music_tempo": "Moderate",
        "total_sound_effect_time_level": "Low",
        "interactivity_level": "Low",
        "themes": ["Family", "Adventure"],
        "image_filename": "bluey.jpg",
    },
    {
        "title": "Cocomelon",
        "stimulation_score": 5,
        "platform": "Netflix",
        "target_age_group": "0-3",
        "dialogue_intensity": "Low",
        "scene_frequency": "Very High",
        "sound_effects_level": "High",
        "total_music_level": "Very High",
        "interactivity_level": "Low",
        "themes": ["Music", "Education"],
    },
    {
        "title": "Blippi",
        "stimulation_score": 4,
        "platform": "YouTube",
        "target_age_group": "2-6",
        "dialogue_intensity": "High",
        "scene_frequency": "High",
        "sound_effects_level": "Moderate-High",
        "total_music_level": "Moderate",
        "interactivity_level": "High",
        "themes": ["STEM", "Education"],
    },
    {
        "title": "Dora the Explorer",
        "stimulation_score": 3,
        "platform": "Paramount+",
        "target_age_group": "3-8",
        "dialogue_intensity": "Moderate",
        "scene_frequency": "Moderate",
        "sound_effects_level": "Moderate",
        "total_music_level": "Moderate",
        "interactivity_level": "High",
        "themes": ["Adventure", "Language"],
    },
    {
        "title": "Puffin Rock",
        "stimulation_score": 1,
        "platform": "Netflix",
        "target_age_group": "Any",
        "dialogue_intensity": "Low",
        "scene_frequency": "Low",
        "sound_effects_level": "Very Low",
        "total_music_level": "Low",
        "interactivity_level": "None",
        "themes": ["Nature"],
    },
    {
        "title": "Odd Squad",
        "stimulation_score": 4,
        "platform": "PBS Kids",
        "target_age_group": "6-12, 12+",
        "dialogue_intensity": "High",
        "scene_frequency": "High",
        "sound_effects_level": "High",
        "total_music_level": "Moderate",
        "interactivity_level": "Moderate",
        "themes": ["STEM", "Comedy"],
    },
    {
        "title": "Mystery Box",
        "stimulation_score": 3,
        "platform": "YouTube",
        "target_age_group": "toddlers and up",
        "dialogue_intensity": "Varies",
        "scene_frequency": "Moderate",
        "interactivity_level": "high",
        "themes": ["Adventure", "STEM"],
    },
]

TITLES_BY_NAME = [
    "Blippi",
    "Bluey",
    "Cocomelon",
    "Dora the Explorer",
    "Mystery Box",
    "Odd Squad",
    "Puffin Rock",
]


def numbered_shows(count):
    """Build ``count`` minimal valid entries titled Show 01, Show 02, ..."""
    return [
        {
            "title": f"Show {i:02d}",
            "stimulation_score": 1 + i % 5,
            "target_age_group": "3-8",
        }
        for i in range(1, count + 1)
    ]


@pytest.fixture
def write_json(tmp_path):
    """Write a value as JSON into the temp directory and return its path."""

    def _write(data, name="shows.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def build_db(tmp_path, write_json):
    """Import a list of entries and return a connected Database."""

    def _build(shows):
        db_path = tmp_path / "shows.db"
        import_shows(write_json(shows), db_path)
        database = Database(db_path)
        database.connect()
        return database

    return _build


@pytest.fixture
def catalog_db(build_db):
    return build_db(SAMPLE_SHOWS)


@pytest.fixture
def make_client():
    clients = []

    def _make(database):
        app = create_app(database, ReconnectPolicy(attempts=1, delay=0))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(catalog_db, make_client):
    return make_client(catalog_db)
