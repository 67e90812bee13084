"""Reserve API application package"""
