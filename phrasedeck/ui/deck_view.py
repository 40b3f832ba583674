"""
Deck View - Phrase Cards, Navigation and Speech
-----------------------------------------------

Renders a PhraseSession: language and topic pickers, the generate button
with its cooldown countdown, the current phrase card with word tabs, and
prev/next navigation (buttons and arrow keys).
"""

from typing import List, Optional

import flet as ft

from phrasedeck.config import CUSTOM_TOPIC, LANGUAGES, SettingsManager, get_topic_options
from phrasedeck.deck import RegenerationResult
from phrasedeck.errors import GenerationError, NoVoicesLoaded, SpeechError, UnsupportedPlatform
from phrasedeck.session import DeckView, PhraseSession
from phrasedeck.speech import play_audio_file


# =============================================================================
# DESIGN TOKENS
# =============================================================================
class DesignTokens:
    """Centralized design tokens for consistent styling."""
    BG_PRIMARY = "#121212"
    BG_SURFACE = "#1A1A1B"
    BG_CARD = "#242426"
    BG_ELEVATED = "#2D2D30"

    TEXT_PRIMARY = "#FFFFFF"
    TEXT_SECONDARY = "#B3B3B3"
    TEXT_TERTIARY = "#808080"
    TEXT_MUTED = "#5C5C5C"

    ACCENT_PRIMARY = "#7C4DFF"
    ACCENT_PRIMARY_HOVER = "#9E7AFF"
    ACCENT_DANGER = "#E57373"
    ACCENT_SUCCESS = "#81C784"
    ACCENT_WARNING = "#FFB74D"

    SPACING_SM = 8
    SPACING_MD = 16
    SPACING_LG = 24

    RADIUS_SM = 8
    RADIUS_MD = 12
    RADIUS_LG = 16

    BUTTON_HEIGHT_MD = 44
    BUTTON_HEIGHT_LG = 52


TTS_NOTICE = (
    "Click the learning phrase or any word tab to hear it. "
    "Audio needs an internet connection and a voice for the learning language."
)


class PhraseDeckView:
    """
    Main phrase deck view.

    All state lives in the PhraseSession; this view only reads DeckView
    snapshots and forwards user actions.
    """

    def __init__(self, page: ft.Page, session: PhraseSession) -> None:
        """
        Initialize the deck view.

        Args:
            page: Flet page instance for updates
            session: Session whose state is rendered
        """
        self.page = page
        self.session = session
        self.settings = SettingsManager()
        self._tts_notice_shown: bool = False

        # UI References
        self._native_dropdown: Optional[ft.Dropdown] = None
        self._learning_dropdown: Optional[ft.Dropdown] = None
        self._topic_dropdown: Optional[ft.Dropdown] = None
        self._custom_topic_input: Optional[ft.TextField] = None
        self._generate_button: Optional[ft.ElevatedButton] = None
        self._generate_label: Optional[ft.Text] = None
        self._generate_spinner: Optional[ft.ProgressRing] = None
        self._native_text: Optional[ft.Text] = None
        self._native_phonetics_text: Optional[ft.Text] = None
        self._learning_text: Optional[ft.Text] = None
        self._learning_phonetics_text: Optional[ft.Text] = None
        self._word_tabs: Optional[ft.Row] = None
        self._prev_button: Optional[ft.IconButton] = None
        self._next_button: Optional[ft.IconButton] = None
        self._counter_text: Optional[ft.Text] = None

        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        return self._container

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def _build_view(self) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[
                    self._build_form(),
                    self._build_card(),
                    self._build_navigation(),
                ],
                spacing=DesignTokens.SPACING_LG,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                scroll=ft.ScrollMode.AUTO,
            ),
            expand=True,
            padding=DesignTokens.SPACING_LG,
        )

    def _language_dropdown(self, label: str, value: str) -> ft.Dropdown:
        return ft.Dropdown(
            value=value,
            options=[ft.dropdown.Option(key=lang.code, text=lang.name) for lang in LANGUAGES],
            label=label,
            border_color=ft.Colors.WHITE24,
            focused_border_color=ft.Colors.INDIGO_200,
            label_style=ft.TextStyle(color=ft.Colors.WHITE54),
            text_style=ft.TextStyle(color=ft.Colors.WHITE),
            width=220,
        )

    def _build_form(self) -> ft.Container:
        """Language pickers, topic picker and the generate button."""
        self._native_dropdown = self._language_dropdown(
            "I speak", self.settings.get("NATIVE_LANG", "en-US")
        )
        self._learning_dropdown = self._language_dropdown(
            "I'm learning", self.settings.get("LEARNING_LANG", "es-ES")
        )

        topic_key = self.settings.get("TOPIC", "common_conversation")
        self._topic_dropdown = ft.Dropdown(
            value=topic_key,
            options=[ft.dropdown.Option(key=key, text=label) for key, label in get_topic_options()],
            label="Topic",
            border_color=ft.Colors.WHITE24,
            focused_border_color=ft.Colors.INDIGO_200,
            label_style=ft.TextStyle(color=ft.Colors.WHITE54),
            text_style=ft.TextStyle(color=ft.Colors.WHITE),
            width=260,
            on_select=self._on_topic_change,
        )
        self._custom_topic_input = ft.TextField(
            label="Custom topic",
            hint_text="e.g. ordering coffee",
            visible=topic_key == CUSTOM_TOPIC,
            border_color=ft.Colors.WHITE24,
            focused_border_color=ft.Colors.INDIGO_200,
            width=260,
        )

        self._generate_label = ft.Text("Generate Phrases", size=15, weight=ft.FontWeight.W_600)
        self._generate_spinner = ft.ProgressRing(width=16, height=16, stroke_width=2, visible=False)
        self._generate_button = ft.ElevatedButton(
            content=ft.Row(
                controls=[
                    self._generate_spinner,
                    ft.Icon(ft.Icons.AUTO_AWESOME, size=20),
                    self._generate_label,
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=10,
            ),
            height=DesignTokens.BUTTON_HEIGHT_LG,
            style=ft.ButtonStyle(
                bgcolor=DesignTokens.ACCENT_PRIMARY,
                color=DesignTokens.TEXT_PRIMARY,
                shape=ft.RoundedRectangleBorder(radius=DesignTokens.RADIUS_MD),
            ),
            on_click=self._on_generate_click,
        )

        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Row(
                        controls=[self._native_dropdown, self._learning_dropdown],
                        alignment=ft.MainAxisAlignment.CENTER,
                        spacing=DesignTokens.SPACING_MD,
                        wrap=True,
                    ),
                    ft.Row(
                        controls=[self._topic_dropdown, self._custom_topic_input],
                        alignment=ft.MainAxisAlignment.CENTER,
                        spacing=DesignTokens.SPACING_MD,
                        wrap=True,
                    ),
                    self._generate_button,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=DesignTokens.SPACING_MD,
            ),
            padding=DesignTokens.SPACING_LG,
            bgcolor=DesignTokens.BG_CARD,
            border_radius=DesignTokens.RADIUS_LG,
        )

    def _build_card(self) -> ft.Container:
        """The current phrase: native text, clickable learning text, word tabs."""
        self._native_text = ft.Text(
            "Pick your languages and a topic, then generate a deck.",
            size=18,
            color=DesignTokens.TEXT_SECONDARY,
            text_align=ft.TextAlign.CENTER,
        )
        self._native_phonetics_text = ft.Text(
            "", size=13, italic=True, color=DesignTokens.TEXT_TERTIARY, visible=False
        )
        self._learning_text = ft.Text(
            "", size=28, weight=ft.FontWeight.BOLD, color=DesignTokens.TEXT_PRIMARY,
            text_align=ft.TextAlign.CENTER,
        )
        self._learning_phonetics_text = ft.Text(
            "", size=14, italic=True, color=DesignTokens.TEXT_TERTIARY, visible=False
        )
        self._word_tabs = ft.Row(
            controls=[],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=DesignTokens.SPACING_SM,
            wrap=True,
        )

        return ft.Container(
            content=ft.Column(
                controls=[
                    self._native_text,
                    self._native_phonetics_text,
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    ft.Container(
                        content=self._learning_text,
                        on_click=self._on_learning_click,
                        tooltip="Listen",
                        padding=DesignTokens.SPACING_SM,
                        border_radius=DesignTokens.RADIUS_SM,
                        ink=True,
                    ),
                    self._learning_phonetics_text,
                    self._word_tabs,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=DesignTokens.SPACING_MD,
            ),
            padding=DesignTokens.SPACING_LG,
            bgcolor=DesignTokens.BG_ELEVATED,
            border_radius=DesignTokens.RADIUS_LG,
            width=720,
        )

    def _build_navigation(self) -> ft.Row:
        self._prev_button = ft.IconButton(
            icon=ft.Icons.ARROW_BACK_ROUNDED,
            tooltip="Previous (Left arrow)",
            on_click=lambda _: self._navigate(-1),
            disabled=True,
        )
        self._next_button = ft.IconButton(
            icon=ft.Icons.ARROW_FORWARD_ROUNDED,
            tooltip="Next (Right arrow)",
            on_click=lambda _: self._navigate(1),
            disabled=True,
        )
        self._counter_text = ft.Text("0/0", size=14, color=DesignTokens.TEXT_SECONDARY)
        return ft.Row(
            controls=[self._prev_button, self._counter_text, self._next_button],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=DesignTokens.SPACING_MD,
        )

    # =========================================================================
    # RENDERING
    # =========================================================================

    def refresh(self) -> None:
        """Re-render everything from a fresh DeckView snapshot."""
        view = self.session.view()
        self._render_card(view)
        self._render_controls(view)
        self.page.update()

    def _render_card(self, view: DeckView) -> None:
        phrase = view.phrase
        if phrase is None:
            return

        self._native_text.value = phrase.native
        self._native_text.color = DesignTokens.TEXT_SECONDARY
        self._native_phonetics_text.value = view.native_phonetics
        self._native_phonetics_text.visible = bool(view.native_phonetics)
        self._learning_text.value = phrase.learning
        self._learning_phonetics_text.value = view.learning_phonetics
        self._learning_phonetics_text.visible = bool(view.learning_phonetics)

        tabs: List[ft.Control] = []
        for index, word in enumerate(phrase.word_by_word):
            label = word.original if not word.transliteration else f"{word.original} ({word.transliteration})"
            tabs.append(
                ft.Container(
                    content=ft.Column(
                        controls=[
                            ft.Text(label, size=14, color=DesignTokens.TEXT_PRIMARY),
                            ft.Text(word.translated, size=12, color=DesignTokens.TEXT_TERTIARY),
                        ],
                        spacing=2,
                        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    ),
                    padding=ft.Padding.symmetric(horizontal=12, vertical=8),
                    bgcolor=DesignTokens.BG_CARD,
                    border_radius=DesignTokens.RADIUS_SM,
                    on_click=lambda _, i=index: self._on_word_click(i),
                    ink=True,
                )
            )
        self._word_tabs.controls = tabs

    def _render_controls(self, view: DeckView) -> None:
        self._prev_button.disabled = view.at_start
        self._next_button.disabled = view.at_end
        self._counter_text.value = view.counter_text

        self._generate_button.disabled = not view.can_regenerate
        self._generate_spinner.visible = view.is_generating
        if view.is_generating:
            self._generate_label.value = "Generating..."
        elif view.cooldown_active:
            self._generate_label.value = f"Next generation in: {view.countdown_text}"
        else:
            self._generate_label.value = "Generate Phrases"

    # =========================================================================
    # EVENT HANDLERS
    # =========================================================================

    def _on_topic_change(self, e) -> None:
        self._custom_topic_input.visible = self._topic_dropdown.value == CUSTOM_TOPIC
        self.page.update()

    def _on_generate_click(self, e) -> None:
        self.page.run_task(self._generate_async)

    async def _generate_async(self) -> None:
        """Run one regeneration and report the outcome."""
        native_code = self._native_dropdown.value
        learning_code = self._learning_dropdown.value
        topic_key = self._topic_dropdown.value
        custom_topic = self._custom_topic_input.value or ""

        # Show generating state immediately
        self._generate_button.disabled = True
        self._generate_spinner.visible = True
        self._generate_label.value = "Generating..."
        self.page.update()

        try:
            result = await self.session.regenerate(topic_key, native_code, learning_code, custom_topic)
        except ValueError as e:
            self._show_snackbar(str(e), error=True)
        except GenerationError as e:
            self._show_snackbar(f"Could not generate phrases: {e}", error=True)
        else:
            if result is RegenerationResult.SUCCESS:
                self.settings.set("NATIVE_LANG", native_code)
                self.settings.set("LEARNING_LANG", learning_code)
                self.settings.set("TOPIC", topic_key)
            elif result is RegenerationResult.BLOCKED:
                self._show_snackbar("Please wait for the cooldown to finish.", error=True)
        finally:
            self.refresh()

    def _navigate(self, step: int) -> None:
        if step < 0:
            self.session.previous()
        else:
            self.session.next()
        self.refresh()

    def on_keyboard(self, e: ft.KeyboardEvent) -> None:
        """Arrow keys move through the deck."""
        if e.key == "Arrow Left":
            self._navigate(-1)
        elif e.key == "Arrow Right":
            self._navigate(1)

    def _on_learning_click(self, e) -> None:
        self.page.run_task(self._speak_async, None)

    def _on_word_click(self, index: int) -> None:
        self.page.run_task(self._speak_async, index)

    async def _speak_async(self, word_index: Optional[int]) -> None:
        """Dispatch speech on the event loop; synthesis reports back via callbacks."""
        try:
            if word_index is None:
                self.session.speak_current()
            else:
                self.session.speak_word(word_index)
        except NoVoicesLoaded:
            self._show_snackbar("Voices are still loading, please try again in a moment.", error=True)
        except UnsupportedPlatform:
            self._show_snackbar("Text-to-speech is not supported on this device.", error=True)
        except SpeechError as e:
            self._show_snackbar(f"Could not play audio: {e}", error=True)

    def on_audio_ready(self, path: str) -> None:
        try:
            play_audio_file(path)
        except OSError as e:
            self._show_snackbar(f"Could not play audio: {e}", error=True)

    def on_speech_error(self, error: Exception) -> None:
        self._show_snackbar(f"Could not play audio: {str(error)[:80]}", error=True)

    def on_cooldown_tick(self, remaining: float) -> None:
        self.refresh()

    def on_cooldown_expire(self) -> None:
        self.refresh()

    def show_tts_notice(self) -> None:
        """Tell the learner once how audio works."""
        if self._tts_notice_shown:
            return
        self._tts_notice_shown = True
        self._show_snackbar(TTS_NOTICE, icon=ft.Icons.VOLUME_UP_ROUNDED)

    def _show_snackbar(self, message: str, error: bool = False, icon: str = None) -> None:
        """Show a snackbar notification."""
        snackbar = ft.SnackBar(
            content=ft.Row(
                controls=[
                    ft.Icon(
                        icon or (ft.Icons.ERROR_OUTLINE if error else ft.Icons.CHECK_CIRCLE_OUTLINE),
                        color=DesignTokens.TEXT_PRIMARY,
                        size=20,
                    ),
                    ft.Text(message, color=DesignTokens.TEXT_PRIMARY, size=14),
                ],
                spacing=12,
            ),
            bgcolor=DesignTokens.ACCENT_DANGER if error else DesignTokens.BG_ELEVATED,
            duration=3500,
        )
        # Clean up old snackbars
        for ctrl in list(self.page.overlay):
            if isinstance(ctrl, ft.SnackBar):
                self.page.overlay.remove(ctrl)
        self.page.overlay.append(snackbar)
        snackbar.open = True
        self.page.update()
