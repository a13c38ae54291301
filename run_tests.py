#!/usr/bin/env python
"""
Test runner for the whole API
Usage: python run_tests.py [app labels...]
"""
import os
import sys

import django
from django.conf import settings
from django.test.utils import get_runner

APPS = [
    'fnb_inventory.core',
    'fnb_inventory.catalog',
    'fnb_inventory.parties',
    'fnb_inventory.inventory',
    'fnb_inventory.purchasing',
    'fnb_inventory.sales',
    'fnb_inventory.reports',
]

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fnb_inventory.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests(sys.argv[1:] or APPS)
    sys.exit(bool(failures))
