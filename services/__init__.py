"""
Модуль: `services/__init__.py`.
Назначение: Сервисный слой – бизнес-правила заказов, записей и учётных данных.
"""
