# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

from relbuild.cli.main import main

main()
