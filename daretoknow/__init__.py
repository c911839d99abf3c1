"""Dare to Know: bracketed truth-or-dare tournaments."""
