"""Book Inventory - yardımcı modüller

- validators.py: istek alanı doğrulamaları
- ui_helpers.py: CLI çıktı biçimlendirme
"""
