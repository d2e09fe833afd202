"""Quote store — single writer for the row collection and editing state."""

from quickquote.store.reducer import reduce
from quickquote.store.service import QuoteStore, diff_states

__all__ = ["QuoteStore", "diff_states", "reduce"]
