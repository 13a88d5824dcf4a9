import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from docwatch.errors import MissingExtension, MissingIdentity
from docwatch.utils.helpers import derive_identity, format_timestamp, get_file_extension, parse_iso_timestamp


def test_format_timestamp_is_fixed_width_utc():
    value = datetime(2024, 3, 5, 7, 8, 9, 123456, tzinfo=timezone.utc)
    assert format_timestamp(value) == "2024-03-05T07:08:09.123Z"

    offset = datetime(2024, 3, 5, 9, 8, 9, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(offset) == "2024-03-05T07:08:09.000Z"


def test_parse_accepts_rfc3339_variants_and_normalizes_to_utc():
    expected = datetime(2024, 3, 5, 7, 8, 9, 123000, tzinfo=timezone.utc)

    assert parse_iso_timestamp("2024-03-05T07:08:09.123Z") == expected
    assert parse_iso_timestamp("2024-03-05T09:08:09.123+02:00") == expected
    assert parse_iso_timestamp("2024-03-05T07:08:09.123000000Z") == expected

    no_fraction = parse_iso_timestamp("2024-03-05T07:08:09Z")
    assert no_fraction.tzinfo == timezone.utc
    assert no_fraction.microsecond == 0


@pytest.mark.parametrize("value", ["", "yesterday", "2024-03-05", "2024-03-05T07:08:09"])
def test_parse_rejects_non_rfc3339(value):
    with pytest.raises(ValueError):
        parse_iso_timestamp(value)


def test_derive_identity_strips_extension():
    assert derive_identity(Path("/data/images/cat.png")) == "cat"
    assert derive_identity(Path("/data/posts/archive.tar.gz")) == "archive.tar"
    assert derive_identity(Path("/data/posts/README")) == "README"


def test_derive_identity_without_file_name():
    with pytest.raises(MissingIdentity):
        derive_identity(Path("/"))


def test_derive_identity_rejects_undecodable_name():
    path = Path(os.fsdecode(b"/data/images/\xffcat.png"))
    with pytest.raises(MissingIdentity):
        derive_identity(path)


def test_get_file_extension():
    assert get_file_extension(Path("/data/images/cat.png")) == "png"

    with pytest.raises(MissingExtension):
        get_file_extension(Path("/data/images/cat"))
