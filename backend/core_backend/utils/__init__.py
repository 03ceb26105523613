"""
Time helpers shared by menus and coupons.
"""
