"""Tests for the extraction adapters."""

import pytest

from catalog_sync.ingestion.driver import ElementSnapshot
from catalog_sync.ingestion.extractors import BackloggdAdapter, PlayStationStoreAdapter, clean_title


class TestCleanTitle:
    """Tests for the tile title heuristic."""

    def test_first_plain_line_wins(self) -> None:
        """Test that badges and prices before the title are skipped."""
        assert clean_title("Premium\nAstro Bot\n69,99 €") == "Astro Bot"

    @pytest.mark.parametrize(
        "noise",
        [
            "69,99 €",
            "$19.99",
            "-50%",
            "1.234",
            "Gratis",
            "Extra",
            "PRUEBA DE JUEGO",
            "Precio rebajado",
            "Ahorra 10",
            "Save 20",
            '<img src="x">',
            "ab",
            "x" * 101,
        ],
    )
    def test_noise_lines_are_skipped(self, noise: str) -> None:
        """Test that each kind of noise line is discarded."""
        assert clean_title(f"{noise}\nGran Turismo 7") == "Gran Turismo 7"

    def test_nothing_left(self) -> None:
        """Test that a tile with only noise yields an empty title."""
        assert clean_title("Gratis\n19,99 €\n\n") == ""

    def test_length_bounds_are_configurable(self) -> None:
        """Test that a lower minimum keeps short titles."""
        assert clean_title("F1") == ""
        assert clean_title("F1", min_length=1) == "F1"

    def test_save_inside_title_is_kept(self) -> None:
        """Test that price words only count at the start of a line."""
        assert clean_title("Game to Save the World") == "Game to Save the World"

    def test_symbol_only_lines_are_skipped(self) -> None:
        """Test that lines without letters or digits never become titles."""
        assert clean_title("™™™\nAstro Bot") == "Astro Bot"
        assert clean_title("™™™") == ""
        assert clean_title("★", min_length=1) == ""


class TestPlayStationStoreAdapter:
    """Tests for the storefront adapter."""

    def test_parse_tiles(self) -> None:
        """Test title cleaning, URL absolutizing and concept ids."""
        adapter = PlayStationStoreAdapter("PS5 Pro", base_url="https://store.playstation.com")
        elements = [
            ElementSnapshot(text="Premium\nAstro Bot\n69,99 €", href="/es-es/concept/10002684"),
            ElementSnapshot(
                text="Gran Turismo 7",
                href="https://store.playstation.com/es-es/concept/10002694/",
            ),
        ]

        entries = adapter.parse(elements)

        assert [e.title for e in entries] == ["Astro Bot", "Gran Turismo 7"]
        assert entries[0].source_url == "https://store.playstation.com/es-es/concept/10002684"
        assert entries[0].stable_id == "10002684"
        assert entries[1].stable_id == "10002694"
        assert all(e.platform_tag == "PS5 Pro" for e in entries)

    def test_tiles_without_title_are_dropped(self) -> None:
        """Test that tiles whose text is only noise produce no entry."""
        adapter = PlayStationStoreAdapter()
        elements = [
            ElementSnapshot(text="Gratis\n-40%", href="/concept/1"),
            ElementSnapshot(text="Astro Bot", href=None),
        ]

        assert adapter.parse(elements) == []

    def test_adapter_does_not_deduplicate(self) -> None:
        """Test that repeated tiles are passed through."""
        adapter = PlayStationStoreAdapter()
        element = ElementSnapshot(text="Astro Bot", href="/concept/1")

        assert len(adapter.parse([element, element])) == 2


class TestBackloggdAdapter:
    """Tests for the list adapter."""

    def test_title_from_link_title(self) -> None:
        """Test that the link title is preferred over the image alt."""
        adapter = BackloggdAdapter("PS5")
        element = ElementSnapshot(
            title="Demon's Souls",
            image_alt="Demon's Souls cover",
            href="https://backloggd.com/games/demons-souls--1/",
        )

        [entry] = adapter.parse([element])

        assert entry.title == "Demon's Souls"
        assert entry.source_url == "https://backloggd.com/games/demons-souls--1/"
        assert entry.stable_id == "demons-souls--1"
        assert entry.platform_tag == "PS5"

    def test_title_from_image_alt(self) -> None:
        """Test the image alt fallback and short titles."""
        adapter = BackloggdAdapter()
        element = ElementSnapshot(image_alt="Ico", href="https://backloggd.com/games/ico/")

        [entry] = adapter.parse([element])

        assert entry.title == "Ico"

    def test_missing_title_is_dropped(self) -> None:
        """Test that covers without any title are skipped."""
        adapter = BackloggdAdapter()

        assert adapter.parse([ElementSnapshot(href="https://backloggd.com/games/x/")]) == []

    def test_symbol_only_title_is_dropped(self) -> None:
        """Test that covers titled only with symbols do not collapse into one key."""
        elements = [ElementSnapshot(title="™"), ElementSnapshot(image_alt="★★")]

        assert BackloggdAdapter().parse(elements) == []

    def test_missing_url(self) -> None:
        """Test that a cover without a link still yields an entry."""
        [entry] = BackloggdAdapter().parse([ElementSnapshot(title="Returnal")])

        assert entry.source_url is None
        assert entry.stable_id is None
        assert entry.identity_key == "returnal"
