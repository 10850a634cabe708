"""AI nutrition advice for logged meals, generated with the OpenAI chat API."""
import logging
from datetime import date, datetime

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gpt-3.5-turbo'
DEFAULT_TIMEOUT = 60.0
TEMPERATURE = 0.7
MAX_TOKENS = 1000

ANALYSIS_TYPES = ('daily', 'weekly')

SYSTEM_PROMPT = (
    'あなたは栄養士のアシスタントです。ユーザーの食事記録に基づいて、'
    '栄養バランスの分析と改善アドバイスを提供してください。日本語で回答してください。'
)

NO_RESULT_MESSAGE = '分析結果を生成できませんでした。'
ERROR_MESSAGE = 'エラーが発生しました。しばらくしてからもう一度お試しください。'

MEAL_TYPE_LABELS = {
    'breakfast': '朝食',
    'lunch': '昼食',
    'dinner': '夕食',
    'snack': '間食',
}

GENDER_LABELS = {
    'male': '男性',
    'female': '女性',
}

NOT_SET = '未設定'


def calculate_age(birth_date: str | date | None, today: date | None = None) -> int | None:
    """Age in whole years, or None if birth_date is missing or unparseable."""
    if not birth_date:
        return None
    if isinstance(birth_date, str):
        try:
            birth_date = date.fromisoformat(birth_date[:10])
        except ValueError:
            return None

    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def get_meal_type_label(meal_type: str) -> str:
    return MEAL_TYPE_LABELS.get(meal_type, meal_type)


def _with_unit(value, unit: str) -> str:
    return f'{value}{unit}' if value else NOT_SET


def format_profile(profile: dict | None) -> str:
    if not profile:
        return '（ユーザープロファイル情報なし）'

    age = calculate_age(profile.get('birthDate'))
    lines = [
        'ユーザー情報：',
        f"- 性別: {GENDER_LABELS.get(profile.get('gender'), 'その他')}",
        f"- 年齢: {_with_unit(age, '歳')}",
        f"- 身長: {_with_unit(profile.get('height'), 'cm')}",
        f"- 体重: {_with_unit(profile.get('weight'), 'kg')}",
        f"- 目標カロリー: {profile.get('targetCalories') or NOT_SET}",
        f"- 目標タンパク質: {_with_unit(profile.get('targetProtein'), 'g')}",
        f"- 目標脂質: {_with_unit(profile.get('targetFat'), 'g')}",
        f"- 目標炭水化物: {_with_unit(profile.get('targetCarbs'), 'g')}",
    ]
    return '\n'.join(lines)


def format_meals(meals: list[dict]) -> str:
    if not meals:
        return '（食事記録なし）'

    blocks = []
    for meal in meals:
        meal_date = datetime.fromisoformat(meal['date']).strftime('%Y/%m/%d')
        header = f"【{meal_date} {get_meal_type_label(meal['mealType'])}】"
        items = [
            f"{item['name']} ({item['quantity']}{item['unit']}) - "
            f"{round(item['calories'])}kcal、タンパク質:{round(item['protein'])}g、"
            f"脂質:{round(item['fat'])}g、炭水化物:{round(item['carbohydrate'])}g"
            for item in meal.get('items') or []
        ]
        blocks.append('\n'.join([header] + (items or ['（品目なし）'])))
    return '\n\n'.join(blocks)


def build_analysis_prompt(meals: list[dict], profile: dict | None, analysis_type: str) -> str:
    """Build the user prompt from the profile, meals and analysis type."""
    if analysis_type == 'daily':
        instructions = '上記の本日の食事記録について、栄養バランスを分析し、改善のためのアドバイスを提供してください。'
    else:
        instructions = '上記の週間の食事記録について、全体的な栄養バランスのパターンや傾向を分析し、改善のためのアドバイスを提供してください。'

    return f"""以下の食事記録と目標に基づいて、栄養バランスの分析とアドバイスを提供してください。

{format_profile(profile)}

【食事記録】
{format_meals(meals)}

{instructions}

具体的に以下の点について分析してください：
1. 摂取カロリーと主要栄養素（タンパク質、脂質、炭水化物）のバランス評価
2. 目標値との比較（設定されている場合）
3. 改善のための具体的なアドバイス
4. 推奨される食品や食事パターンの提案
"""


class NutritionAdvisor:
    """Generates nutrition advice text. Provider errors never raise."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: float = DEFAULT_TIMEOUT):
        self.model = model
        self.client = OpenAI(api_key=api_key, timeout=timeout)

    def analyze_meals(self, meals: list[dict], profile: dict | None, analysis_type: str = 'daily') -> str:
        prompt = build_analysis_prompt(meals, profile, analysis_type)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except Exception as e:
            logger.error(f"OpenAI API call failed: {e}")
            return ERROR_MESSAGE

        if not response.choices:
            return NO_RESULT_MESSAGE
        return response.choices[0].message.content or NO_RESULT_MESSAGE
