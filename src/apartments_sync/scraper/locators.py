# scraper/locators.py
"""
CSS-локаторы страницы каталога bonava.lv.

Вёрстка сайта не версионируется: при её изменении правится только этот файл.
"""

# Страница каталога
CONSENT_BUTTON = "#onetrust-accept-btn-handler"
PROJECT_GRID = ".product-search__card-grid"
PROJECT_CARD = ".neighbourhood-card"

# Карточка проекта
PROJECT_NAME = ".neighbourhood-card__heading"
PROJECT_LINK = ".neighbourhood-card__info > div > div:nth-child(2) > a"
PROJECT_OPEN_BUTTON = "div.neighbourhood-card__info > div > div:nth-child(2) > button"

# Модальное окно проекта
DIALOG_OVERLAY = ".dialog__overlay"
DIALOG_CONTENT = ".dialog__content"
ITEM_CARD = ".home-card"

# Карточка квартиры
ITEM_IMAGE = ".home-card__image-desktop img"
ITEM_TITLE = ".home-card__heading"
ITEM_LINK = ".home-card__call-to-action a"
ITEM_FACT = ".home-card__fact__text"
ITEM_STATUS = ".sales-status__label"
ITEM_TAG = ".offering-tag"
