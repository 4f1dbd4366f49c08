# src/forkdiff/utils/tokenizer.py
import tiktoken

from forkdiff.config import FALLBACK_TOKEN_ENCODING, TOKEN_ENCODING


class Tokenizer:
    _encoding = None

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            try:
                cls._encoding = tiktoken.get_encoding(TOKEN_ENCODING)
            except Exception:
                # Fallback
                cls._encoding = tiktoken.get_encoding(FALLBACK_TOKEN_ENCODING)
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Estimates token count for a patch text."""
        try:
            encoding = Tokenizer.get_encoding()
            return len(encoding.encode(text, disallowed_special=()))
        except Exception:
            # Encodings are downloaded on first use; offline runs still get a report
            return len(text) // 4
