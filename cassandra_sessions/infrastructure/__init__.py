"""Infrastructure layer - Technical implementations"""
