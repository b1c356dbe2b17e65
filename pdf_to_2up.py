#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Lay out a PDF or PostScript document two pages per sheet.
"""

import printlncs.cli


if __name__ == "__main__":
	printlncs.cli.main()
