"""Tests for search candidate selection."""

from typing import Any

from freshspot.application.services.catalog_matcher import (
    TRACK_SCAN_WINDOW,
    select_album,
    select_track,
)


def _album(name: str, album_type: str = "album") -> dict[str, Any]:
    return {"type": "album", "name": name, "album_type": album_type}


def _candidate(item_type: str, parent_album_type: str) -> dict[str, Any]:
    """Search hit with a parent album, like /search?type=track returns."""
    return {
        "type": item_type,
        "name": f"{item_type}-{parent_album_type}",
        "album": {"type": "album", "name": "Parent", "album_type": parent_album_type},
    }


class TestSelectAlbum:
    """Test album selection."""

    def test_empty_returns_none(self) -> None:
        """Test no candidates means not found."""
        assert select_album([], "x", "y") is None

    def test_singleton_returned_without_matching(self) -> None:
        """Test a lone candidate wins even if its name doesn't match."""
        only = _album("Something Else")
        assert select_album([only], "x", "y") is only

    def test_name_match_on_first_confirmation(self) -> None:
        """Test the candidate whose name equals the first confirmation wins."""
        a, b = _album("A_NAME"), _album("B_NAME")
        assert select_album([a, b], "B_NAME", "z") is b

    def test_name_match_on_second_confirmation(self) -> None:
        """Test the second confirmation string is also checked."""
        a, b = _album("Deluxe Edition"), _album("Kendrick Lamar")
        assert select_album([a, b], "GNX", "Kendrick Lamar") is b

    def test_match_is_case_insensitive_and_trimmed(self) -> None:
        """Test case and surrounding whitespace are ignored."""
        a, b = _album("Other"), _album("Alligator Bites Never Heal")
        assert select_album([a, b], "  alligator bites never heal ", "z") is b

    def test_first_match_wins(self) -> None:
        """Test scan order is preserved when several candidates match."""
        a, b, c = _album("Other"), _album("Match"), _album("match")
        assert select_album([a, b, c], "MATCH", "z") is b

    def test_scans_past_second_candidate(self) -> None:
        """Test album selection looks at every candidate, unlike tracks."""
        candidates = [_album("One"), _album("Two"), _album("Three"), _album("Target")]
        assert select_album(candidates, "target", "z") is candidates[3]

    def test_falls_back_to_first(self) -> None:
        """Test no name match falls back to the top result."""
        a, b = _album("A_NAME"), _album("B_NAME")
        assert select_album([a, b], "nope", "nothing") is a

    def test_both_confirmations_none(self) -> None:
        """Test a title without album/artist still gets the top result."""
        a, b = _album("A_NAME"), _album("B_NAME")
        assert select_album([a, b], None, None) is a

    def test_missing_album_title_skips_name_match(self) -> None:
        """Test an artist-only title trusts the top hit over a self-titled record."""
        top, self_titled = _album("Other Record"), _album("Kendrick Lamar")
        assert select_album([top, self_titled], None, "Kendrick Lamar") is top

    def test_missing_artist_skips_name_match(self) -> None:
        """Test one missing confirmation disables matching on the other one too."""
        top, named = _album("Other Record"), _album("GNX")
        assert select_album([top, named], "GNX", None) is top

    def test_null_candidates_ignored(self) -> None:
        """Test nulls in the search items are skipped, not crashed on."""
        match = _album("GNX")
        assert select_album([None, match], "GNX", "Kendrick Lamar") is match
        assert select_album([None, None], "GNX", "Kendrick Lamar") is None


class TestSelectTrack:
    """Test track selection."""

    def test_empty_returns_none(self) -> None:
        """Test no candidates means not found."""
        assert select_track([]) is None

    def test_singleton_single_returns_parent_album(self) -> None:
        """Test a lone hit on a single resolves to the album entity, not the track."""
        only = _candidate("track", "single")
        assert select_track([only]) is only["album"]

    def test_first_bare_track_wins(self) -> None:
        """Test the top result is taken when it is a track."""
        first = _candidate("track", "album")
        second = _candidate("track", "single")
        assert select_track([first, second]) is first

    def test_singleton_track_on_full_album(self) -> None:
        """Test a lone track from a full album is still a track."""
        only = _candidate("track", "album")
        assert select_track([only]) is only

    def test_second_candidate_within_window(self) -> None:
        """Test the scan reaches index 1."""
        first = _candidate("album", "album")
        second = _candidate("track", "album")
        assert select_track([first, second, _candidate("track", "single")]) is second

    def test_single_parent_counts_as_hit(self) -> None:
        """Test a non-track candidate with a single parent is accepted."""
        first = _candidate("album", "single")
        assert select_track([first, _candidate("album", "album")]) is first

    def test_third_candidate_outside_window(self) -> None:
        """Test only the 3rd candidate matching means not found."""
        candidates = [
            _candidate("album", "album"),
            _candidate("album", "compilation"),
            _candidate("track", "single"),
        ]
        assert TRACK_SCAN_WINDOW == 2
        assert select_track(candidates) is None

    def test_candidate_without_parent_album(self) -> None:
        """Test candidates missing the album key don't crash the scan."""
        candidates = [{"type": "album", "name": "x"}, {"type": "artist", "name": "y"}]
        assert select_track(candidates) is None

    def test_null_candidates_ignored(self) -> None:
        """Test nulls in the search items neither crash nor count as hits."""
        first = {"type": "album", "album": {"album_type": "album"}}
        assert select_track([first, None, None]) is None

    def test_null_before_single_leaves_singleton(self) -> None:
        """Test a lone real hit after a null is treated as a singleton."""
        only = _candidate("track", "single")
        assert select_track([None, only]) is only["album"]
