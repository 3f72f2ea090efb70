"""Interface Tkinter principale."""

from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk

import sv_ttk

from adminconsole.services import SessionApiClient
from adminconsole.state import AdminState
from adminconsole.ui.avatar import AvatarPanel
from adminconsole.ui.dispatch import UiDispatcher
from adminconsole.ui.presenter import (
    STATUS_ERROR,
    STATUS_SUCCESS,
    ConsolePresenter,
    ControlStates,
)
from adminconsole.ui.user_table import COLUMNS

ACCENT_COLOR = "#3B82F6"
BACKGROUND_COLOR = "#121212"
CARD_COLOR = "#181818"
STATUS_NEUTRAL_COLOR = "#B3B3B3"
STATUS_ERROR_COLOR = "#F87171"
STATUS_SUCCESS_COLOR = "#4ADE80"
WINDOW_SIZE = "980x600"

_TONE_COLORS = {
    STATUS_SUCCESS: STATUS_SUCCESS_COLOR,
    STATUS_ERROR: STATUS_ERROR_COLOR,
}


class MainWindow:
    """Fenêtre principale : connexion, liste des utilisateurs, aperçu et suppression.

    La fenêtre ne fait qu'afficher ; les décisions reviennent à
    :class:`ConsolePresenter`, qui l'appelle à travers les méthodes publiques
    de la section « Vue ».
    """

    def __init__(
        self,
        client: SessionApiClient,
        state: AdminState | None = None,
        dispatcher: UiDispatcher | None = None,
    ) -> None:
        self._client = client

        self.root = tk.Tk()
        self.root.title("Administration – Gestion des utilisateurs")
        self.root.geometry(WINDOW_SIZE)
        self.root.minsize(820, 480)
        self.root.protocol("WM_DELETE_WINDOW", self.close)

        self._dispatcher = dispatcher or UiDispatcher(self.root)
        self._presenter = ConsolePresenter(client, state or AdminState(), self, self._dispatcher)

        sv_ttk.set_theme("dark")
        self.root.configure(bg=BACKGROUND_COLOR)
        self._configure_styles()

        self._username_var = tk.StringVar()
        self._password_var = tk.StringVar()

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=0)
        self.root.rowconfigure(1, weight=1)

        self._build_header()
        self._build_main_area()
        self._presenter.refresh_controls()

    # --------------------------------------------------------------------- UI -
    def _configure_styles(self) -> None:
        style = ttk.Style()
        style.configure("Main.TFrame", background=BACKGROUND_COLOR)
        style.configure("Header.TFrame", background=BACKGROUND_COLOR)
        style.configure("Card.TFrame", background=CARD_COLOR)
        style.configure(
            "Section.TLabel",
            background=CARD_COLOR,
            foreground="#FFFFFF",
            font=("Helvetica", 12, "bold"),
        )
        style.configure(
            "Field.TLabel",
            background=BACKGROUND_COLOR,
            foreground=STATUS_NEUTRAL_COLOR,
            font=("Helvetica", 11),
        )
        style.configure(
            "Status.TLabel",
            background=BACKGROUND_COLOR,
            foreground=STATUS_NEUTRAL_COLOR,
            font=("Helvetica", 11),
        )
        style.configure(
            "AvatarName.TLabel",
            background=CARD_COLOR,
            foreground="#FFFFFF",
            font=("Helvetica", 14, "bold"),
        )
        style.configure(
            "AvatarImage.TLabel",
            background=BACKGROUND_COLOR,
            foreground=STATUS_NEUTRAL_COLOR,
        )
        style.configure("Accent.TButton", font=("Helvetica", 11, "bold"))
        style.configure("TButton", padding=(16, 8))
        style.map("TButton", background=[("disabled", "#2B2B2B")])
        style.configure("Treeview", rowheight=26)
        style.map(
            "Treeview",
            background=[("selected", ACCENT_COLOR)],
            foreground=[("selected", "#FFFFFF")],
        )
        self.root.option_add("*Font", "Helvetica 11")

    def _build_header(self) -> None:
        frame = ttk.Frame(self.root, style="Header.TFrame", padding=(24, 12))
        frame.grid(row=0, column=0, sticky="nwe")
        frame.columnconfigure(6, weight=1)

        ttk.Label(frame, text="Utilisateur :", style="Field.TLabel").grid(row=0, column=0, sticky="w")
        self._username_entry = ttk.Entry(frame, textvariable=self._username_var, width=18)
        self._username_entry.grid(row=0, column=1, padx=(6, 16))

        ttk.Label(frame, text="Mot de passe :", style="Field.TLabel").grid(row=0, column=2, sticky="w")
        self._password_entry = ttk.Entry(frame, textvariable=self._password_var, show="•", width=18)
        self._password_entry.grid(row=0, column=3, padx=(6, 16))
        self._password_entry.bind("<Return>", lambda _: self._on_login_clicked())

        self._login_button = ttk.Button(
            frame,
            text="Connexion",
            command=self._on_login_clicked,
            style="Accent.TButton",
        )
        self._login_button.grid(row=0, column=4, padx=(0, 8))

        self._logout_button = ttk.Button(frame, text="Déconnexion", command=self._presenter.logout)
        self._logout_button.grid(row=0, column=5)

        self._status_label = ttk.Label(frame, text="Non connecté", style="Status.TLabel")
        self._status_label.grid(row=0, column=6, sticky="e")

    def _build_main_area(self) -> None:
        main_frame = ttk.Frame(self.root, padding=(24, 8, 24, 16), style="Main.TFrame")
        main_frame.grid(row=1, column=0, sticky="nsew")
        main_frame.columnconfigure(0, weight=1)
        main_frame.columnconfigure(1, weight=0)
        main_frame.rowconfigure(0, weight=1)

        self._build_users_section(main_frame)

        self._avatar_panel = AvatarPanel(main_frame)
        self._avatar_panel.grid(row=0, column=1, sticky="nsew", padx=(20, 0))

    def _build_users_section(self, parent: tk.Misc) -> None:
        frame = ttk.Frame(parent, style="Card.TFrame", padding=(20, 18))
        frame.grid(row=0, column=0, sticky="nsew")
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(1, weight=1)

        ttk.Label(frame, text="Utilisateurs", style="Section.TLabel").grid(row=0, column=0, sticky="w")

        list_container = ttk.Frame(frame, style="Card.TFrame")
        list_container.grid(row=1, column=0, sticky="nsew", pady=(16, 0))
        list_container.columnconfigure(0, weight=1)
        list_container.rowconfigure(0, weight=1)

        self._users_tree = ttk.Treeview(
            list_container,
            columns=self._presenter.table_model.column_keys,
            show="headings",
            selectmode="browse",
        )
        for column in COLUMNS:
            self._users_tree.heading(column.key, text=column.heading)
            self._users_tree.column(column.key, width=column.width, anchor=column.anchor)
        self._users_tree.grid(row=0, column=0, sticky="nsew")
        self._users_tree.bind("<<TreeviewSelect>>", self._on_selection_changed)

        scrollbar = ttk.Scrollbar(list_container, orient=tk.VERTICAL, command=self._users_tree.yview)
        scrollbar.grid(row=0, column=1, sticky="ns")
        self._users_tree.configure(yscrollcommand=scrollbar.set)

        self._delete_button = ttk.Button(
            frame,
            text="Supprimer l'utilisateur",
            command=self._presenter.delete_selected,
        )
        self._delete_button.grid(row=2, column=0, sticky="w", pady=(16, 0))

    # --------------------------------------------------------------- Callbacks -
    def _on_login_clicked(self) -> None:
        self._presenter.login(self._username_var.get(), self._password_var.get())

    def _on_selection_changed(self, _event: tk.Event | None = None) -> None:
        selection = self._users_tree.selection()
        # Les éléments du Treeview portent des identifiants générés par Tk ;
        # seule leur position relie une ligne à son enregistrement.
        self._presenter.select_row(self._users_tree.index(selection[0]) if selection else None)

    # -------------------------------------------------------------------- Vue -
    def set_status(self, text: str, tone: str) -> None:
        self._status_label.configure(text=text, foreground=_TONE_COLORS.get(tone, STATUS_NEUTRAL_COLOR))

    def set_controls(self, controls: ControlStates) -> None:
        entry_state = tk.NORMAL if controls.login else tk.DISABLED
        self._username_entry.configure(state=entry_state)
        self._password_entry.configure(state=entry_state)
        self._login_button.configure(state=entry_state)
        self._logout_button.configure(state=tk.NORMAL if controls.logout else tk.DISABLED)
        self._delete_button.configure(state=tk.NORMAL if controls.delete else tk.DISABLED)

    def show_error(self, title: str, message: str) -> None:
        messagebox.showerror(title, message, parent=self.root)

    def ask_confirmation(self, title: str, message: str) -> bool:
        return messagebox.askyesno(title, message, parent=self.root)

    def clear_password(self) -> None:
        self._password_var.set("")

    def render_users(self, rows: list[tuple[object, ...]]) -> None:
        self._users_tree.delete(*self._users_tree.get_children())
        for values in rows:
            self._users_tree.insert("", tk.END, values=values)

    def remove_row(self, index: int) -> None:
        children = self._users_tree.get_children()
        if 0 <= index < len(children):
            self._users_tree.delete(children[index])

    def clear_avatar(self) -> None:
        self._avatar_panel.clear_selection()

    def show_avatar_loading(self, username: str) -> None:
        self._avatar_panel.show_loading(username)

    def show_avatar(self, data: bytes) -> None:
        self._avatar_panel.show_image(data)

    def show_avatar_error(self) -> None:
        self._avatar_panel.show_error()

    # ----------------------------------------------------------------- Public -
    def run(self) -> None:
        self._dispatcher.start()
        self.root.mainloop()

    def close(self) -> None:
        self._dispatcher.stop()
        self._client.close()
        self.root.destroy()
