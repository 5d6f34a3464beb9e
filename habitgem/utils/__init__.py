"""Вспомогательные утилиты HabitGem"""
