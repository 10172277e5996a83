"""Unified command-line interface for the food cost calculator.

Usage:
    foodcost catalog list|add|set|remove
    foodcost recipes list|show|delete
    foodcost import FILE [--selling-price P] [--yield N] [--save NAME]
    foodcost export ID CSV_PATH
    foodcost serve [--host] [--port]
"""
