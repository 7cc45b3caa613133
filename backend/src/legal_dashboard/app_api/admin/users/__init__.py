"""Cognito user pool administration"""
