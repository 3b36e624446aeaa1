"""主入口模块

用途:
    作为程序的入口点，调用主函数并处理返回值

使用方式:
    python -m script_scaffold [-hV] [-dqlv]
"""

import sys

import script_scaffold

sys.exit(script_scaffold.main())
