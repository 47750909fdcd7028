'''
MIT Licence: Copyright (c) 2025 Baya Systems <https://bayasystems.com>
'''

__version__ = '0.1.0'
