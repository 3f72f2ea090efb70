"""Panneau d'aperçu de l'utilisateur sélectionné."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from PIL import ImageTk

from adminconsole.ui.thumbnails import AvatarDecodeError, make_thumbnail

NO_SELECTION_TEXT = "(aucune sélection)"


class AvatarPanel(ttk.Frame):
    """Affiche le nom et la miniature de l'utilisateur sélectionné."""

    def __init__(self, parent: tk.Misc, *, style: str = "Card.TFrame", **kwargs) -> None:
        super().__init__(parent, style=style, padding=(20, 18), **kwargs)
        self._photo: ImageTk.PhotoImage | None = None

        ttk.Label(self, text="Utilisateur sélectionné", style="Section.TLabel").grid(
            row=0, column=0, sticky="w"
        )
        self._username_label = ttk.Label(self, text=NO_SELECTION_TEXT, style="AvatarName.TLabel")
        self._username_label.grid(row=1, column=0, pady=(14, 8))

        self._image_label = ttk.Label(
            self,
            text="—",
            style="AvatarImage.TLabel",
            anchor="center",
            width=16,
        )
        self._image_label.grid(row=2, column=0, pady=(0, 8))
        self.columnconfigure(0, weight=1)

    def _set_placeholder(self, text: str) -> None:
        self._photo = None
        self._image_label.configure(image="", text=text)

    def clear_selection(self) -> None:
        self._username_label.configure(text=NO_SELECTION_TEXT)
        self._set_placeholder("—")

    def show_loading(self, username: str) -> None:
        self._username_label.configure(text=username or NO_SELECTION_TEXT)
        self._set_placeholder("Chargement…")

    def show_image(self, data: bytes) -> None:
        try:
            image = make_thumbnail(data)
        except AvatarDecodeError:
            self._set_placeholder("Image invalide")
            return
        self._photo = ImageTk.PhotoImage(image)
        self._image_label.configure(image=self._photo, text="")

    def show_error(self) -> None:
        self._set_placeholder("Erreur de chargement")
