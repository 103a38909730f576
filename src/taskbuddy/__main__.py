# src/taskbuddy/__main__.py

from .cli.main import main

main()
