#!/usr/bin/env python
"""
Command line entrypoint for the clinic backend.

Defaults ``DJANGO_SETTINGS_MODULE`` to ``clinic.settings`` and hands
over to Django's management utility (``migrate``, ``runserver``,
``ensure_test_users``, ``populate_data`` ...).
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clinic.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed and is the virtual "
            "environment active?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
