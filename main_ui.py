"""
PhraseDeck: Phrase Card GUI
---------------------------

A Flet interface for generating and practicing bilingual phrase decks.
"""

import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on sys.path for absolute imports
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import flet as ft

from phrasedeck import __version__
from phrasedeck.session import PhraseSession
from phrasedeck.ui import PhraseDeckView


class PhraseDeckApp:
    """Main application controller."""

    def __init__(self, page: ft.Page) -> None:
        """
        Initialize the application.

        Args:
            page: Flet page instance
        """
        self.page = page
        self.view: Optional[PhraseDeckView] = None
        self._setup_page()
        self._init_session()
        self._build_ui()

    def _setup_page(self) -> None:
        """Configure page settings and theme."""
        self.page.title = "PhraseDeck"
        self.page.theme_mode = ft.ThemeMode.DARK
        self.page.bgcolor = "#121212"
        self.page.theme = ft.Theme(
            color_scheme_seed="#7C4DFF",
            font_family="Inter, Roboto, Segoe UI, sans-serif",
        )
        self.page.padding = 0
        self.page.window.min_width = 800
        self.page.window.min_height = 600
        self.page.window.width = 1000
        self.page.window.height = 760

    def _init_session(self) -> None:
        """Create the session; speech and cooldown callbacks route to the view."""
        self.session = PhraseSession.from_settings(
            platform_kwargs={
                "on_audio_ready": lambda path: self.view.on_audio_ready(path),
                "on_error": lambda error: self.view.on_speech_error(error),
            },
            on_cooldown_tick=lambda remaining: self.view.on_cooldown_tick(remaining),
            on_cooldown_expire=lambda: self.view.on_cooldown_expire(),
        )

    def _build_ui(self) -> None:
        """Build the main UI layout."""
        self.view = PhraseDeckView(self.page, self.session)

        header = ft.Container(
            content=ft.Row(
                controls=[
                    ft.Icon(ft.Icons.TRANSLATE_ROUNDED, color=ft.Colors.INDIGO_200, size=28),
                    ft.Text("PhraseDeck", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                    ft.Text(f"v{__version__}", size=11, color=ft.Colors.WHITE24),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=10,
            ),
            padding=ft.Padding.only(top=20, bottom=10),
        )

        self.page.add(
            ft.Column(
                controls=[
                    header,
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    self.view.container,
                ],
                spacing=0,
                expand=True,
            )
        )
        self.page.on_keyboard_event = self.view.on_keyboard
        self.page.on_close = lambda _: self.page.run_task(self.session.close)
        self.page.run_task(self._start_session)

    async def _start_session(self) -> None:
        await self.session.start()
        self.view.show_tts_notice()


def main(page: ft.Page) -> None:
    """
    Main entry point for Flet application.

    Args:
        page: Flet page instance
    """
    try:
        PhraseDeckApp(page)
    except Exception:
        import traceback
        error_text = traceback.format_exc()
        page.add(
            ft.Container(
                content=ft.Column(
                    controls=[
                        ft.Text("UI failed to start", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.RED_400),
                        ft.Text("Copy this error when reporting the problem:", size=12, color=ft.Colors.WHITE70),
                        ft.Container(
                            content=ft.Text(error_text, size=11, selectable=True, color=ft.Colors.WHITE70),
                            padding=10,
                            bgcolor=ft.Colors.with_opacity(0.08, ft.Colors.WHITE),
                            border_radius=8,
                        ),
                    ],
                    spacing=10,
                ),
                padding=20,
            )
        )
        page.update()


if __name__ == "__main__":
    ft.run(main)
