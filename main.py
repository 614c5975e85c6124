"""
Точка входа для запуска из корня репозитория: ``python main.py -i FILE -n K``.
"""

from pkmeans.main import main

if __name__ == "__main__":
    raise SystemExit(main())
