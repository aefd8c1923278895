"""File adapters: CSV/Excel decoding and report export."""
