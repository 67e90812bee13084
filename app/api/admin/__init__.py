"""Admin console routers"""
