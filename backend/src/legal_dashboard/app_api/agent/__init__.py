"""Bedrock agent queries"""
