"""Spoken-word vocabulary for LaTeX commands and Unicode math symbols.

Both tables map to the same phrases so `\\leq` and `≤` are read identically.
"""

from __future__ import annotations

GREEK_LETTERS: tuple[str, ...] = (
    "alpha",
    "beta",
    "gamma",
    "delta",
    "epsilon",
    "zeta",
    "eta",
    "theta",
    "iota",
    "kappa",
    "lambda",
    "mu",
    "nu",
    "xi",
    "omicron",
    "pi",
    "rho",
    "sigma",
    "tau",
    "upsilon",
    "phi",
    "chi",
    "psi",
    "omega",
)

# Commands written with an opening brace consume it; the matching `}` is
# dropped later together with every other closing brace.
LATEX_BRACED_COMMANDS: dict[str, str] = {
    "frac": "fraction",
    "sqrt": "square root of",
}

LATEX_COMMANDS: dict[str, str] = {
    "sum": "sum",
    "prod": "product",
    "int": "integral",
    "lim": "limit",
    "infty": "infinity",
    "times": "times",
    "div": "divided by",
    "pm": "plus or minus",
    "mp": "minus or plus",
    "leq": "less than or equal to",
    "geq": "greater than or equal to",
    "neq": "not equal to",
    "approx": "approximately equal to",
    "equiv": "equivalent to",
    "propto": "proportional to",
    "in": "in",
    "notin": "not in",
    "subset": "subset of",
    "supset": "superset of",
    "cup": "union",
    "cap": "intersection",
    "emptyset": "empty set",
    "forall": "for all",
    "exists": "there exists",
    "rightarrow": "implies",
    "leftarrow": "implied by",
    "leftrightarrow": "if and only if",
    **{letter: letter for letter in GREEK_LETTERS},
}

LATEX_SCRIPT_MARKERS: dict[str, str] = {
    "^{": "to the power of",
    "_{": "sub",
}

UNICODE_SYMBOLS: dict[str, str] = {
    "∑": "sum",
    "∏": "product",
    "∫": "integral",
    "√": "square root of",
    "∞": "infinity",
    "×": "times",
    "÷": "divided by",
    "±": "plus or minus",
    "∓": "minus or plus",
    "≤": "less than or equal to",
    "≥": "greater than or equal to",
    "≠": "not equal to",
    "≈": "approximately equal to",
    "≡": "equivalent to",
    "∝": "proportional to",
    "∈": "in",
    "∉": "not in",
    "⊂": "subset of",
    "⊃": "superset of",
    "∪": "union",
    "∩": "intersection",
    "∅": "empty set",
    "∀": "for all",
    "∃": "there exists",
    "→": "implies",
    "←": "implied by",
    "↔": "if and only if",
    "α": "alpha",
    "β": "beta",
    "γ": "gamma",
    "δ": "delta",
    "ε": "epsilon",
    "ζ": "zeta",
    "η": "eta",
    "θ": "theta",
    "ι": "iota",
    "κ": "kappa",
    "λ": "lambda",
    "μ": "mu",
    "ν": "nu",
    "ξ": "xi",
    "ο": "omicron",
    "π": "pi",
    "ρ": "rho",
    "σ": "sigma",
    "ς": "sigma",
    "τ": "tau",
    "υ": "upsilon",
    "φ": "phi",
    "χ": "chi",
    "ψ": "psi",
    "ω": "omega",
}
