"""UNO命令行工具.

提供两个命令：
- simulate: 用"打出第一张能打的牌"的策略自动进行一整局比赛
- deck: 按种子输出一副洗好的牌
"""

import json
import logging
from typing import Any, Dict, List, Optional

import click

from ..application import GameCommandService, GameQueryService, TurnView, get_config_service
from ..core.deck import Color, create_initial_deck
from ..core.random_utils import identity_shuffler, seeded_shuffler

logger = logging.getLogger(__name__)

DEFAULT_MAX_ACTIONS = 100000


def _configure_logging(profile: str) -> None:
    """按配置初始化日志输出."""
    config = get_config_service().get_logging_config(profile).data
    logging.basicConfig(level=getattr(logging, config.log_level), format=config.log_format)


def choose_action(view: TurnView) -> Dict[str, Any]:
    """
    最简单的策略：打出第一张能打的牌，没有就摸牌.

    王牌选择手里第一张有颜色的牌的颜色，全是王牌时选红色.

    Args:
        view: 当前座位的行动视图

    Returns:
        Dict[str, Any]: {'action': 'play', 'index', 'color'} 或 {'action': 'draw'}
    """
    if not view.playable_indices:
        return {'action': 'draw'}

    index = view.playable_indices[0]
    color = None
    if index in view.wild_indices:
        colors = [record['color'] for record in view.hand if record.get('color')]
        color = colors[0] if colors else Color.RED.value
    return {'action': 'play', 'index': index, 'color': color}


def run_simulation(players: List[str], seed: int, target_score: Optional[int] = None,
                   cards_per_player: Optional[int] = None,
                   max_actions: int = DEFAULT_MAX_ACTIONS) -> Dict[str, Any]:
    """
    自动进行一整局比赛.

    相同的参数总是得到相同的结果.

    Returns:
        Dict[str, Any]: 包含winner、scores、rounds、actions的结果

    Raises:
        click.ClickException: 玩家名称重复、创建比赛失败或超过最大行动数时
    """
    # 结果按名称汇总分数，名称必须唯一
    duplicates = sorted({name for name in players if players.count(name) > 1})
    if duplicates:
        raise click.ClickException(f"玩家名称不能重复: {', '.join(duplicates)}")

    commands = GameCommandService()
    queries = GameQueryService(commands)

    created = commands.create_game(players, target_score=target_score,
                                   cards_per_player=cards_per_player, seed=seed)
    if not created.success:
        raise click.ClickException(created.message)
    game_id = created.data['game_id']

    rounds: List[Dict[str, Any]] = []
    actions = 0
    while True:
        table = queries.get_table_view(game_id).data
        if table.winner is not None:
            break
        if actions >= max_actions:
            raise click.ClickException(f"超过最大行动数{max_actions}，比赛仍未结束")

        seat = table.player_in_turn
        view = queries.get_turn_view(game_id, seat).data
        decision = choose_action(view)

        if decision['action'] == 'draw':
            result = commands.draw_card(game_id, seat)
        else:
            # 打出倒数第二张牌之前先声明uno
            if len(view.hand) == 2:
                commands.say_uno(game_id, seat)
            result = commands.play_card(game_id, seat, decision['index'], decision['color'])
        actions += 1

        if not result.success:
            raise click.ClickException(f"座位{seat}行动失败: {result.message}")
        if result.data and result.data.get('round_ended'):
            rounds.append({
                'winner': players[result.data['round_winner']],
                'score': result.data['round_score'],
            })

    final = queries.get_table_view(game_id).data
    commands.remove_game(game_id)
    return {
        'winner': players[final.winner],
        'scores': dict(zip(players, final.scores)),
        'rounds': rounds,
        'actions': actions,
    }


@click.group()
@click.option('--log-profile', default='quiet', show_default=True,
              type=click.Choice(['default', 'debug', 'quiet']), help='日志配置')
def cli(log_profile: str) -> None:
    """UNO规则引擎命令行工具."""
    _configure_logging(log_profile)


@cli.command()
@click.option('--players', '-p', default='Alice,Bob,Carol', show_default=True,
              help='逗号分隔的玩家名称')
@click.option('--seed', '-s', default=0, show_default=True, type=int, help='随机种子')
@click.option('--target', '-t', default=None, type=click.IntRange(min=1), help='目标分数')
@click.option('--cards-per-player', '-c', default=None, type=click.IntRange(min=1), help='每人发牌数')
@click.option('--max-actions', default=DEFAULT_MAX_ACTIONS, show_default=True,
              type=click.IntRange(min=1), help='最大行动数')
@click.option('--json', 'as_json', is_flag=True, help='以JSON输出结果')
def simulate(players: str, seed: int, target: Optional[int], cards_per_player: Optional[int],
             max_actions: int, as_json: bool) -> None:
    """自动进行一整局比赛并输出结果."""
    names = [name.strip() for name in players.split(',') if name.strip()]
    outcome = run_simulation(names, seed, target_score=target,
                             cards_per_player=cards_per_player, max_actions=max_actions)

    if as_json:
        click.echo(json.dumps(outcome, ensure_ascii=False, indent=2))
        return

    for number, round_result in enumerate(outcome['rounds'], start=1):
        click.echo(f"第{number}回合: {round_result['winner']} 获胜，得 {round_result['score']} 分")
    click.echo(f"比赛结束 ({outcome['actions']} 次行动)")
    for name, score in outcome['scores'].items():
        click.echo(f"  {name}: {score}")
    click.echo(f"赢家: {outcome['winner']}")


@cli.command()
@click.option('--seed', '-s', default=None, type=int, help='随机种子，不给时输出未洗的牌')
def deck(seed: Optional[int]) -> None:
    """以JSON记录输出一副牌，顶部在前."""
    cards = create_initial_deck()
    cards.shuffle(seeded_shuffler(seed) if seed is not None else identity_shuffler)
    click.echo(json.dumps(cards.to_snapshot(), ensure_ascii=False, indent=2))


def main() -> None:
    """命令行入口."""
    cli()


if __name__ == '__main__':
    main()
