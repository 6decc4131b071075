"""
This is an interpreter for the geo expression language.

    py -m geo program.geo

runs a program;

    py -m geo

starts an interactive session, and

    py -m geo -h

explains all the arguments.
"""
from .cmdline import main

main()
