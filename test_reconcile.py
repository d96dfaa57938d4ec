#!/usr/bin/env python3
"""Tests for catalog reconciliation."""

import json
from dataclasses import replace

import pytest

from tv_italia.canonical import PINNED_FIRST_ID, PINNED_SECOND_ID, SYSTEM_CHANNELS, SYSTEM_CHANNEL_IDS
from tv_italia.channel import Category, Channel
from tv_italia.exceptions import CatalogCorruptError
from tv_italia.reconcile import decode_catalog, encode_catalog, reconcile


def user_channel(channel_id="custom-1", order=None, **fields):
    return Channel(
        id=channel_id,
        name=fields.pop("name", "Canale Utente"),
        category=Category.LOCAL,
        stream_url="https://example.com/live/index.m3u8",
        is_user_added=True,
        order=order,
        **fields
    )


def ids(channels):
    return [channel.id for channel in channels]


def test_fresh_install_uses_templates_with_zero_views():
    channels = reconcile(None)

    assert sorted(ids(channels)) == sorted(SYSTEM_CHANNEL_IDS)
    assert all(channel.view_count == 0 for channel in channels)


def test_fresh_install_keeps_template_rating():
    templates = [replace(SYSTEM_CHANNELS[0], rating=3, view_count=40)] + list(SYSTEM_CHANNELS[1:])

    channels = reconcile(None, templates)

    stiletv = next(c for c in channels if c.id == PINNED_FIRST_ID)
    assert stiletv.rating == 3
    assert stiletv.view_count == 0


def test_metrics_survive_and_descriptive_fields_come_from_template():
    template = next(c for c in SYSTEM_CHANNELS if c.id == "rainews24")
    saved = replace(template, name="Renamed", description="stale", rating=4, view_count=120, order=12)

    channels = reconcile([saved])

    merged = next(c for c in channels if c.id == "rainews24")
    assert merged.rating == 4
    assert merged.view_count == 120
    assert merged.order == 12
    assert merged.name == template.name
    assert merged.description == template.description
    assert merged.stream_url == template.stream_url


def test_missing_persisted_order_falls_back_to_template():
    template = next(c for c in SYSTEM_CHANNELS if c.id == "tv2000")
    saved = Channel(id="tv2000", rating=2, view_count=5)

    merged = next(c for c in reconcile([saved]) if c.id == "tv2000")

    assert merged.order == template.order
    assert merged.rating == 2


def test_canonical_channels_missing_from_blob_come_back():
    channels = reconcile([user_channel()])

    assert SYSTEM_CHANNEL_IDS <= set(ids(channels))
    assert "custom-1" in ids(channels)


@pytest.mark.parametrize("persisted", [
    None,
    [],
    [user_channel()],
    [Channel(id="settv", rating=5)],
])
def test_every_canonical_id_present_exactly_once(persisted):
    channels = reconcile(persisted)

    for channel_id in SYSTEM_CHANNEL_IDS:
        assert ids(channels).count(channel_id) == 1


def test_pinned_ids_lead_whatever_their_order():
    persisted = [
        Channel(id=PINNED_FIRST_ID, order=500),
        Channel(id=PINNED_SECOND_ID, order=400),
        user_channel("custom-early", order=-10),
    ]

    channels = reconcile(persisted)

    assert ids(channels)[:3] == [PINNED_FIRST_ID, PINNED_SECOND_ID, "custom-early"]


def test_user_channel_interleaves_by_order():
    channels = reconcile(list(SYSTEM_CHANNELS) + [user_channel("custom-1", order=3)])

    assert ids(channels) == [
        "stiletv",
        "settv",
        "rainews24",
        "custom-1",
        "sportitalia",
        "radioitaliatv",
        "tv2000",
    ]


def test_absent_order_sorts_last_and_ties_keep_input_order():
    persisted = [
        user_channel("custom-a"),
        user_channel("custom-b", order=7),
        user_channel("custom-c"),
        user_channel("custom-d", order=7),
    ]

    channels = reconcile(persisted)

    assert ids(channels) == [
        "stiletv",
        "settv",
        "rainews24",
        "sportitalia",
        "radioitaliatv",
        "custom-b",
        "custom-d",
        "tv2000",
        "custom-a",
        "custom-c",
    ]


def test_duplicate_persisted_ids_keep_first():
    persisted = [
        Channel(id="settv", rating=4, view_count=10),
        Channel(id="settv", rating=1, view_count=99),
        user_channel("custom-1", name="first"),
        user_channel("custom-1", name="second"),
    ]

    channels = reconcile(persisted)

    settv = next(c for c in channels if c.id == "settv")
    assert (settv.rating, settv.view_count) == (4, 10)
    custom = [c for c in channels if c.id == "custom-1"]
    assert len(custom) == 1
    assert custom[0].name == "first"


def test_user_record_with_canonical_id_is_replaced_by_template():
    impostor = user_channel(PINNED_SECOND_ID, name="Impostor", rating=3, view_count=8)

    channels = reconcile([impostor])

    settv = next(c for c in channels if c.id == PINNED_SECOND_ID)
    assert settv.name == "SET TV"
    assert settv.is_user_added is False
    assert (settv.rating, settv.view_count) == (3, 8)
    assert ids(channels).count(PINNED_SECOND_ID) == 1


def test_reconcile_is_idempotent_through_persistence():
    first = reconcile([
        Channel(id="sportitalia", rating=4, view_count=120, order=1),
        user_channel("custom-1", order=3, rating=2, view_count=7),
    ])

    second = reconcile(decode_catalog(encode_catalog(first)))

    assert second == first


def test_decode_absent_blob():
    assert decode_catalog(None) is None


@pytest.mark.parametrize("blob", ["{not json", '{"id": "stiletv"}', '"text"', ""])
def test_decode_rejects_corrupt_blob(blob):
    with pytest.raises(CatalogCorruptError):
        decode_catalog(blob)


def test_decode_skips_unreadable_records():
    blob = json.dumps([{"id": "custom-1", "name": "Ok"}, {"name": "no id"}, 42])

    channels = decode_catalog(blob)

    assert ids(channels) == ["custom-1"]


def test_decode_applies_defaults_for_missing_fields():
    blob = json.dumps([{"id": "custom-1", "rating": 9, "viewCount": -3, "category": "??"}])

    channel = decode_catalog(blob)[0]

    assert channel.rating == 5
    assert channel.view_count == 0
    assert channel.order is None
    assert channel.category is Category.ENTERTAINMENT
    assert channel.is_user_added is False


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__]))
