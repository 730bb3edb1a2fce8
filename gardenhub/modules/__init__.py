"""
Feature modules of the Community Garden Hub.
Each module follows domain / application / infrastructure / presentation layering.
"""
