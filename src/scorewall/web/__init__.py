"""SCOREWALL Web Interface"""
