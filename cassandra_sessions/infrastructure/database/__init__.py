"""Cassandraへの接続とセッションテーブル"""
