#!/usr/bin/env python3
from setuptools import setup

setup(
    name='lesswire',
    version='0.1',
    packages=[
        'lesswire',
        'lesswire.app',
        'lesswire.less',
        'lesswire.modules',
        'lesswire.modules.builtins',
        'lesswire.commands',
        'lesswire.commands.builtins'],
    scripts=['scripts/lesswire'],
    install_requires=['docopt', 'lesscpy'],
    extras_require={
        'test': ['pytest']
    },
    license='Apache License, Version 2.0',
    description='LESS compiler module and admin style builder'
)
