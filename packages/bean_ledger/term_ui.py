"""Terminal prompt helpers (prompt_toolkit-based).

Kept separate from the CLI command bodies so the interactive pieces can be
tested in isolation with a pipe input.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .models import account_type

_ACCOUNT_RE = re.compile(r"^[A-Za-z0-9_:-]+$")


def _suggest(vocab: Sequence[str], text: str) -> Suggestion | None:
    """Remainder of the first known account that ``text`` prefixes (any case)."""

    if not text:
        return None
    lower = text.lower()
    if any(w.lower() == lower for w in vocab):
        return None
    for w in vocab:
        if w.lower().startswith(lower):
            remainder = w[len(text) :]
            return Suggestion(remainder) if remainder else None
    return None


def _type_label(account: str) -> str:
    t = account_type(account)
    return t.value if t is not None else "custom"


def _through_next_segment(remainder: str) -> str:
    # "ets:Bank:Checking" -> "ets:"; the last segment is taken whole.
    i = remainder.find(":")
    return remainder if i < 0 else remainder[: i + 1]


class _AccountSuggest(AutoSuggest):
    def __init__(self, vocab: Sequence[str]) -> None:
        self._vocab = list(vocab)

    def get_suggestion(self, buffer, document):
        return _suggest(self._vocab, document.text)


class _AccountValidator(Validator):
    def validate(self, document) -> None:
        text = document.text
        if not _ACCOUNT_RE.match(text) or text.startswith(":") or text.endswith(":"):
            raise ValidationError(
                message="Account names are ':'-separated letters, digits, '_' or '-'"
            )


def select_account(
    accounts: Sequence[str] | Iterable[str],
    *,
    default: str = "",
    message: str = "Account: ",
    session: PromptSession | None = None,
) -> str:
    """Prompt for an account name with autocomplete over ``accounts``.

    - Typing a prefix of a known account shows the rest in grey. Tab accepts
      it one ``:`` segment at a time; Enter accepts all of it and submits.
    - Tab with no grey text opens the dropdown (case-insensitive, matches
      anywhere in the name, annotated with the account type).
    - Names not in ``accounts`` are accepted; the caller opens them.
    """

    words = list(accounts)
    completer = WordCompleter(
        words,
        ignore_case=True,
        match_middle=True,
        sentence=True,
        meta_dict={w: _type_label(w) for w in words},
    )

    kb = KeyBindings()

    @kb.add("tab", eager=True)
    def _(event) -> None:  # pragma: no cover - integration path
        b = event.app.current_buffer
        s = _suggest(words, b.document.text)
        if s is not None:
            b.insert_text(_through_next_segment(s.text))
        elif b.complete_state is None:
            b.start_completion(select_first=True)
        else:
            b.complete_next()

    @kb.add("enter", eager=True)
    def _(event) -> None:  # pragma: no cover - integration path
        b = event.app.current_buffer
        cs = b.complete_state
        if cs is not None and cs.current_completion is not None:
            b.apply_completion(cs.current_completion)
        else:
            s = _suggest(words, b.document.text)
            if s is not None:
                b.insert_text(s.text)
        b.validate_and_handle()

    if session is None:
        sess: PromptSession = PromptSession(key_bindings=kb)
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
            key_bindings=kb,
        )

    result = sess.prompt(
        message,
        completer=completer,
        default=default,
        auto_suggest=_AccountSuggest(words),
        validator=_AccountValidator(),
        validate_while_typing=False,
        bottom_toolbar=f"{len(words)} known accounts; new names are opened on save",
        style=Style.from_dict({"auto-suggestion": "fg:#888888"}),
    )
    return result.strip()


__all__ = ["select_account"]
