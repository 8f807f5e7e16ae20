"""Stepchat: chat with a language model directly or through editable text-processing pipelines."""

from dotenv import load_dotenv

load_dotenv()
